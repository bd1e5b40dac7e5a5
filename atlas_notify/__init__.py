"""Stripe checkout membership service with Discord announcements."""
