"""nanotrust — Systems"""
