"""Relay Station Manager HTTP接口"""
