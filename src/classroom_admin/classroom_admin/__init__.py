"""Classroom administration package.

Organized by feature modules (schedules, attendance, duty, ...) with a thin
Flask controller layer on top of service/repository layers. The schedule
engine is pure; the attendance and duty ledgers are idempotent upsert stores
written only by a cohort's monitor.
"""
