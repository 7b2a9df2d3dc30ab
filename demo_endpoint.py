"""
Start a local Planter server for manual testing.

Runs planter.main:app with reload on port 8000.
"""

import uvicorn

if __name__ == "__main__":
    print("=" * 60)
    print("Starting Planter Backend Demo")
    print("=" * 60)
    print()
    print("📌 API Endpoints:")
    print("   - Health Check:     GET  http://localhost:8000/health")
    print("   - Plant Catalog:    GET  http://localhost:8000/plants?q=монстера")
    print("   - Questionnaire:    POST http://localhost:8000/recommendations/questionnaire")
    print("   - Chat Sessions:    POST http://localhost:8000/chat/sessions")
    print("   - API Docs:              http://localhost:8000/docs")
    print()
    print("🔐 Authentication:")
    print("   /chat/* requires Authorization: Bearer <token>")
    print("   /plants and /recommendations accept anonymous requests")
    print()
    print("📝 Test with curl:")
    print('   curl -X POST "http://localhost:8000/recommendations/questionnaire" \\')
    print('     -H "Content-Type: application/json" \\')
    print('     -d \'{"sunlight_preference": "MEDIUM", "pet_friendly": true, "care_level": 2}\'')
    print()
    print("=" * 60)
    print("Starting server on http://localhost:8000")
    print("Press Ctrl+C to stop")
    print("=" * 60)
    print()

    uvicorn.run(
        "planter.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
