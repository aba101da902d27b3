"""Users module - sign-in provisioning, profiles and admin user management"""
