"""Shared exceptions and constants"""
