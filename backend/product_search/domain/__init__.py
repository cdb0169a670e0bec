"""Domain layer - ports, models and pure search logic"""
