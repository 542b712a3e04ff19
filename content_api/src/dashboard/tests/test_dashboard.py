from bson import ObjectId


def test_dashboard_counts_each_collection(client, fake_db):
    for _ in range(3):
        fake_db["services"].docs.append({"_id": ObjectId()})
    fake_db["banners"].docs.append({"_id": ObjectId()})
    for _ in range(2):
        fake_db["galleries"].docs.append({"_id": ObjectId()})

    resp = client.get("/api/dashboard-stats")
    assert resp.status_code == 200
    assert resp.json()["result"] == {
        "totalServices": 3,
        "totalBanners": 1,
        "totalFaqs": 0,
        "totalGalleries": 2,
    }


def test_dashboard_tracks_creates_and_deletes(client):
    client.post("/api/faqs", json={"question": "Q1", "answer": "A1"})
    created = client.post("/api/faqs", json={"question": "Q2", "answer": "A2"}).json()
    client.delete(f"/api/faqs/{created['result']['insertedId']}")

    stats = client.get("/api/dashboard-stats").json()["result"]
    assert stats["totalFaqs"] == 1


def test_dashboard_store_error(client, fake_db):
    fake_db["faqs"].fail_on.add("count_documents")
    resp = client.get("/api/dashboard-stats")
    assert resp.status_code == 500
    assert resp.json()["message"] == "count_documents failed"
