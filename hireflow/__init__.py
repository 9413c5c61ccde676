"""
HireFlow - Interview & Hiring Platform
Connects job candidates with HR recruiters.

Architecture:
- MongoDB: Users, hiring posts, applications, notifications, interview sessions
- DeepSeek AI: Mock interview questions and answer evaluation
- SendGrid / in-app records: Application decision notifications
"""

__version__ = "1.0.0"
