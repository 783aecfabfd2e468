"""Core claim logic: merkle commitment, snapshot intake, registry, storage"""
