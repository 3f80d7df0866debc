# Supabase table: profiles
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

profiles:
- id: uuid (primary key, references auth.users.id)
- email: text (not null) - synced from auth.users at signup
- full_name: text (nullable) - display name
- avatar_url: text (nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

Row-level permissions: anyone may select; a user may insert/update only
the row whose id equals auth.uid().
"""
