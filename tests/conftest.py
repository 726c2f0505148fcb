import os

os.environ.setdefault("UX_AUDIT_OPENAI_API_KEY", "sk-test-0000000000000000000000")
os.environ.setdefault("UX_AUDIT_PSI_API_KEY", "psi-test-key")
os.environ.setdefault("UX_AUDIT_DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("UX_AUDIT_RENDER_ENGINE", "httpx")
os.environ.setdefault("UX_AUDIT_CORS_ORIGINS", "http://allowed.example")
