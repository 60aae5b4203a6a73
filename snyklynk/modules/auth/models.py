# Supabase Auth
# This module uses Supabase's built-in authentication system
# No custom tables are required - Supabase Auth handles:
# - User registration (auth.users table)
# - User login and session management
# - JWT token generation and validation
# - Email confirmation and resending of confirmation mail
# - Bans (ban_duration) and deletion through the admin API

"""
Supabase Auth provides:
- auth.sign_up() - Register new users (called by the registration wizards)
- auth.sign_in_with_password() - Authenticate users and admins
- auth.get_user() - Get current user from JWT token
- auth.resend() - Resend the signup confirmation email
- auth.admin.sign_out() - Revoke a session
- auth.admin.update_user_by_id() - Ban / unban (service role only)
- auth.admin.delete_user() - Delete the auth user (service role only)

Admins are regular auth users whose app_metadata contains {"is_admin": true}.
app_metadata is set server-side and cannot be modified by users.
"""
