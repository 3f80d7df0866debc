# Supabase Auth
# Appli Farm uses Supabase's built-in authentication system
# No custom tables are required for credentials - Supabase Auth handles:
# - User registration with email confirmation (auth.users table)
# - Password sign-in and session tokens
# - JWT validation (auth.get_user)
# The public profile row lives in `profiles` (see app/modules/profiles/models.py)

"""
Supabase Auth calls used by AuthService:
- auth.sign_up() - Register, stores full_name in user_metadata and mails a confirmation link
- auth.sign_in_with_password() - Authenticate, returns access/refresh tokens
- auth.verify_otp() - Confirm an email address from the token_hash in the mailed link
- auth.get_user() - Resolve the current user from a bearer JWT
- auth.sign_out() - Logout
"""
