# Supabase table: likes
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

likes:
- id: uuid (primary key)
- user_id: uuid (foreign key to profiles.id, not null)
- project_id: uuid (foreign key to projects.id, not null, on delete cascade)
- created_at: timestamp (default: now())
- unique constraint on (user_id, project_id)

projects.likes_count mirrors the number of likes rows for the project and is
recomputed from those rows after every like/unlike.
"""
