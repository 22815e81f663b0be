"""
Pydantic schemas for API request and response validation.

Request models carry the back-office form rules (field lengths and allowed
values); response models describe the Supabase rows the services return.
"""
