"""
Command handlers used by the CLI
"""
