# Supabase table: comments
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

comments:
- id: uuid (primary key)
- project_id: uuid (foreign key to projects.id, not null, on delete cascade)
- user_id: uuid (foreign key to profiles.id, not null) - author
- content: text (not null, at most 100 characters after trimming)
- created_at: timestamp (default: now())

Rows are returned with the author embedded as `profiles:user_id (full_name, avatar_url)`.
Only the author may delete a comment.
"""
