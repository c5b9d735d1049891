"""
Internship Placement Portal
Role-based REST API for students, recruiters, faculty and admins.

Architecture:
- MongoDB: every collection (users, profiles, jobs, applications, ...)
- Cloudinary: uploaded files (pictures, resumes, verification documents)
- JWT: stateless auth via header or HTTP-only cookie
"""

__version__ = "1.0.0"
