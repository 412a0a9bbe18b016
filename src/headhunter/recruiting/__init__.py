"""Recruit discovery and scoring pipeline"""
