"""Health probes — liveness always 200, readiness reflects the database."""


async def test_liveness(client):
    res = await client.get("/api/v1/health/")

    assert res.status_code == 200
    assert res.json()["service"] == "sleep-tracker-api"


async def test_readiness_with_database(client):
    res = await client.get("/api/v1/health/ready")

    assert res.status_code == 200
    assert res.json()["checks"] == {"database": "healthy", "cache": "disabled"}
