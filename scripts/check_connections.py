#!/usr/bin/env python3
"""
Connection Check Script

Run this to verify MongoDB, the AI provider and the notification channel
are configured.
Usage: python scripts/check_connections.py
"""
from hireflow.core.config import get_settings
from hireflow.db.mongodb import test_mongo_connection
from hireflow.services.deepseek_client import get_deepseek_client


def main():
    settings = get_settings()
    print("=" * 50)
    print("HIREFLOW - CONNECTION CHECK")
    print("=" * 50)

    print("\n[1] Testing MongoDB...")
    print(f"    Database: {settings.mongodb_db}")
    if test_mongo_connection():
        print("    ✅ MongoDB: CONNECTED")
    else:
        print("    ❌ MongoDB: FAILED")

    print("\n[2] Testing DeepSeek API...")
    if settings.deepseek_api_key:
        print(f"    Base URL: {settings.deepseek_base_url}")
        if get_deepseek_client().test_connection():
            print("    ✅ DeepSeek: CONNECTED")
        else:
            print("    ❌ DeepSeek: FAILED")
    else:
        print("    ⚠️  DeepSeek: API key not configured")

    print("\n[3] Notification channel...")
    print(f"    Channel: {settings.notification_channel}")
    if settings.notification_channel == "email" and not (
        settings.sendgrid_api_key and settings.sendgrid_from_email
    ):
        print("    ⚠️  Email channel selected but SendGrid is not configured")

    print("\n" + "=" * 50)
    print("Connection check complete!")
    print("=" * 50)


if __name__ == "__main__":
    main()
