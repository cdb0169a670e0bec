"""Application services"""
