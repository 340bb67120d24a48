"""pctl CLI commands"""
