"""Shared utilities: logging, validation, benchmarks"""
