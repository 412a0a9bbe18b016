"""Application layer: CLI commands and their dispatcher"""
