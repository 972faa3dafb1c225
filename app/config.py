import os
from dotenv import load_dotenv

load_dotenv(dotenv_path=".env")

# Supabase (record store + identity provider)
SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_SERVICE_ROLE_KEY = os.getenv("SUPABASE_SERVICE_ROLE_KEY")
SUPABASE_ANON_KEY = os.getenv("SUPABASE_ANON_KEY")

# Cloudinary (image CDN); both empty means uploads fall back to inline data URLs
CLOUDINARY_CLOUD_NAME = os.getenv("CLOUDINARY_CLOUD_NAME", "")
CLOUDINARY_UPLOAD_PRESET = os.getenv("CLOUDINARY_UPLOAD_PRESET", "")

# Demo account provisioned by the one-time initialization
DEMO_ACCOUNT_EMAIL = os.getenv("DEMO_ACCOUNT_EMAIL", "demo@example.com")
DEMO_ACCOUNT_PASSWORD = os.getenv("DEMO_ACCOUNT_PASSWORD", "Demo123!")
DEMO_ACCOUNT_DISPLAY_NAME = os.getenv("DEMO_ACCOUNT_DISPLAY_NAME", "Utilisateur Démo")

# Comma separated; "*" allows every origin
CORS_ALLOW_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",")
    if origin.strip()
]
