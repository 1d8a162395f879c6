"""Supabase data access mixins"""
