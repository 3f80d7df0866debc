# Supabase table: project_updates
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

project_updates:
- id: uuid (primary key)
- project_id: uuid (foreign key to projects.id, not null, on delete cascade)
- content: text (not null, at most 50 characters after trimming)
- created_at: timestamp (default: now())

An update log entry has no author column: only the owner of the parent
project may add or delete entries.
"""
