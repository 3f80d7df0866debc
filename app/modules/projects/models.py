# Supabase table: projects
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

projects:
- id: uuid (primary key, default: gen_random_uuid())
- user_id: uuid (foreign key to profiles.id, not null) - owner
- title: text (not null)
- description: text (not null)
- url: text (not null)
- image_url: text (nullable) - external URL or object storage public URL
- categories: text[] (default: '{}')
- tags: text[] (default: '{}')
- likes_count: integer (default: 0) - denormalized count of likes rows
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())

List and detail queries embed the owner as `profiles:user_id (full_name, avatar_url)`.
Child rows in likes, comments and project_updates reference projects.id.
"""
