"""Veterinary clinic administration service"""
