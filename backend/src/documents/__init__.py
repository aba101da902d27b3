"""Documents module - upload, review and lifecycle endpoints for onboarding documents"""
