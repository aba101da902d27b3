"""Security tests for the onboarding service

This module contains security-focused tests including:
- Authentication bypass attempts
- Token manipulation
- Privilege escalation to the ADMIN role
- Cross-user document access
"""
