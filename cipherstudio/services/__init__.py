"""Tree, synchronization and workspace services"""
