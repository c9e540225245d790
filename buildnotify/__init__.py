"""buildnotify - CI build status notifications for Slack webhooks"""
__version__ = "0.1.0"
