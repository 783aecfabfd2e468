"""Command line interface"""
