# tests/api/test_conversations.py


def test_get_conversation(client):
    created = client.post(
        "/api/generate-workflow",
        json={"prompt": "Post new Airtable records to Slack every hour"},
    ).json()["data"]

    r = client.get(f"/api/conversations/{created['conversationId']}")
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["id"] == int(created["conversationId"])
    assert data["workflowId"] == created["workflowId"]
    assert [m["role"] for m in data["messages"]] == ["user", "assistant"]
    assert data["messages"][0]["content"] == "Post new Airtable records to Slack every hour"
    assert "workflowData" not in data["messages"][0]


def test_unknown_conversation_id_creates_new_thread(client):
    r = client.post(
        "/api/generate-workflow",
        json={"prompt": "Post new Airtable records to Slack every hour", "conversationId": "12345"},
    )
    assert r.json()["data"]["conversationId"] == "1"


def test_conversation_invalid_and_missing(client):
    r = client.get("/api/conversations/nope")
    assert r.status_code == 400
    assert r.json() == {"success": False, "error": "Invalid conversation ID"}

    r = client.get("/api/conversations/9")
    assert r.status_code == 404
    assert r.json() == {"success": False, "error": "Conversation not found"}
