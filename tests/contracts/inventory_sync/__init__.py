"""Inventory sync service test contracts"""
