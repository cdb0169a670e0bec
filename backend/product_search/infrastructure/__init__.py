"""Infrastructure layer - adapters implementing domain ports"""
