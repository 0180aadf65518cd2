#!/usr/bin/env python3
"""
Easy startup script for the Slangify translation API.
Checks configuration and runs the FastAPI server.
"""
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))

def check_environment():
    """Check if environment is properly configured."""
    from config.settings import settings

    print("🔍 Checking environment...")

    issues = []

    # Check API key (never print it)
    if not settings.OPENAI_API_KEY:
        issues.append("❌ OPENAI_API_KEY not set")
    else:
        print("✅ OpenAI API key configured")

    if settings.STORE_BACKEND == "redis" and not settings.REDIS_URL:
        issues.append("❌ REDIS_URL not set (required for STORE_BACKEND=redis)")

    # Print configuration
    print(f"\n📊 Configuration:")
    print(f"  - Model: {settings.OPENAI_MODEL} (max tokens {settings.OPENAI_MAX_TOKENS}, temperature {settings.OPENAI_TEMPERATURE})")
    print(f"  - Input limits: {settings.MAX_CHARACTERS} chars / {settings.MAX_WORDS} words")
    print(f"  - Rate limit: {settings.RATE_LIMIT_REQUESTS} requests per {settings.RATE_LIMIT_WINDOW}s")
    print(f"  - Cache: TTL {settings.CACHE_TTL}s, max {settings.CACHE_MAX_ENTRIES} entries")
    print(f"  - Store backend: {settings.STORE_BACKEND}")
    if settings.KILL_SWITCH_ENABLED:
        print("  - ⚠️  Kill switch ENABLED")

    if issues:
        print("\n⚠️  Issues found:")
        for issue in issues:
            print(f"  {issue}")
        print("\n💡 Please update your .env file with the required settings")
        return False

    print("\n✅ All checks passed!")
    return True


def main():
    """Main startup function."""
    print("=" * 80)
    print("🚀 Slangify Translation API")
    print("=" * 80)
    print()

    # Check environment
    if not check_environment():
        print("\n❌ Environment check failed. Please fix the issues above.")
        sys.exit(1)

    from config.settings import settings

    # Import and run FastAPI
    print("\n🌐 Starting FastAPI server...")
    print(f"📚 API Documentation will be available at: http://{settings.HOST}:{settings.PORT}/docs")
    print(f"🏥 Health check available at: http://{settings.HOST}:{settings.PORT}{settings.API_PREFIX}/health")
    print("\n" + "=" * 80)
    print()

    import uvicorn
    uvicorn.run(
        "src.api.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )


if __name__ == "__main__":
    main()
