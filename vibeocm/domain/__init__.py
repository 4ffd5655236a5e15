"""
Domain models for the wizard.
"""
