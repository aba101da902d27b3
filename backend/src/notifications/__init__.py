"""Notifications module - in-app notification feed and transactional email"""
