"""Utility modules for Relay Station Manager"""
