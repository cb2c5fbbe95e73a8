from app.wellness.catalog import load_catalog
from app.wellness.tasks import tasks_for_risk

WELLNESS_REPLY = {
    "moodScore": 2,
    "anxietyScore": 8,
    "stressScore": 6,
    "socialEngagementScore": 6,
    "recommendations": ["Talk to a counsellor this week"],
    "dailyActivities": ["Take a short walk", "Call a friend"],
}

def test_health_and_config(client):
    assert client.get("/health").json() == {"ok": True}
    assert client.get("/version").json()["version"]
    cfg = client.get("/config/app").json()
    assert cfg["crisisHotline"] == "988"

def test_signup_login_refresh_logout(client):
    r = client.post("/auth/signup", json={"email": "Flow@Example.com", "password": "P@ssw0rd!"})
    assert r.status_code == 200, r.text
    assert r.json()["user"]["email"] == "flow@example.com"
    assert r.json()["user"]["onboardingComplete"] is False
    assert client.post("/auth/signup", json={"email": "flow@example.com", "password": "P@ssw0rd!"}).status_code == 409

    assert client.post("/auth/login", json={"email": "flow@example.com", "password": "wrong-pass"}).status_code == 401
    assert client.post("/auth/login", json={"email": "nobody@example.com", "password": "P@ssw0rd!"}).status_code == 404
    r = client.post("/auth/login", json={"email": "flow@example.com", "password": "P@ssw0rd!"})
    assert r.status_code == 200
    refresh = r.json()["token"]["refreshToken"]

    r = client.post("/auth/refresh", json={"refreshToken": refresh})
    assert r.status_code == 200
    new_refresh = r.json()["token"]["refreshToken"]
    # rotated: the old token is spent
    assert client.post("/auth/refresh", json={"refreshToken": refresh}).status_code == 401

    assert client.post("/auth/logout", json={"refreshToken": new_refresh}).json() == {"ok": True}
    assert client.post("/auth/logout", json={"refreshToken": new_refresh}).json() == {"ok": True}
    assert client.post("/auth/refresh", json={"refreshToken": new_refresh}).status_code == 401

def test_requires_token(client):
    assert client.get("/users/me").status_code == 401
    assert client.get("/dashboard", headers={"Authorization": "Bearer nope"}).status_code == 401

def test_refresh_token_is_not_an_access_token(client, signup):
    data = signup()
    r = client.get("/users/me", headers={"Authorization": f"Bearer {data['token']['refreshToken']}"})
    assert r.status_code == 401

def test_profile_patch(client, auth):
    r = client.patch("/users/me", headers=auth, json={"freeTimeFrom": "09:00", "freeTimeTo": "10:00", "workingHours": 8})
    assert r.status_code == 200, r.text
    assert r.json()["workingHours"] == 8
    # the window is checked against the stored end as well
    assert client.patch("/users/me", headers=auth, json={"freeTimeFrom": "11:00"}).status_code == 422
    assert client.get("/users/me", headers=auth).json()["freeTimeFrom"] == "09:00"

def test_unassessed_user_shows_default_tier(client, auth):
    r = client.get("/risk", headers=auth).json()
    assert r["level"] == 2 and r["assessed"] is False
    assert client.get("/users/me", headers=auth).json()["riskLevel"] == 2

def test_questionnaire_reassessment(client, auth):
    r = client.post("/risk/questionnaire", headers=auth, json={"phq9Score": 21, "gad7Score": 0})
    assert r.json()["level"] == 4
    assert r.json()["needsSupport"] is True
    r = client.post("/risk/questionnaire", headers=auth, json={"phq9Score": 0, "gad7Score": 0, "safetyRisk": True})
    assert r.json()["level"] == 5

def test_journal_crud(client, auth):
    r = client.post("/journal", headers=auth, json={"entry": "  Long day at work.  ", "mood": "tired"})
    assert r.status_code == 200, r.text
    entry = r.json()
    assert entry["entry"] == "Long day at work."
    assert entry["sentimentScore"] is None
    assert client.post("/journal", headers=auth, json={"entry": "   "}).status_code == 422

    r = client.patch(f"/journal/{entry['id']}", headers=auth, json={"mood": "calm"})
    assert r.json()["mood"] == "calm"
    assert [e["id"] for e in client.get("/journal", headers=auth).json()] == [entry["id"]]

    assert client.delete(f"/journal/{entry['id']}", headers=auth).json() == {"ok": True}
    assert client.delete(f"/journal/{entry['id']}", headers=auth).status_code == 404
    assert client.get("/journal", headers=auth).json() == []

def test_journal_entries_are_private(client, signup):
    a = {"Authorization": f"Bearer {signup()['token']['accessToken']}"}
    b = {"Authorization": f"Bearer {signup()['token']['accessToken']}"}
    entry = client.post("/journal", headers=a, json={"entry": "mine"}).json()
    assert client.patch(f"/journal/{entry['id']}", headers=b, json={"entry": "x"}).status_code == 404
    assert client.post(f"/journal/{entry['id']}/analyze", headers=b).status_code == 404
    assert client.get("/journal", headers=b).json() == []
    assert client.delete(f"/journal/{entry['id']}", headers=b).status_code == 404
    assert [e["id"] for e in client.get("/journal", headers=a).json()] == [entry["id"]]

def test_journal_analysis_moves_risk(client, auth, sentiment):
    entry = client.post("/journal", headers=auth, json={"entry": "Everything feels hopeless."}).json()
    sentiment.score = -0.8
    r = client.post(f"/journal/{entry['id']}/analyze", headers=auth)
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["entry"]["sentimentScore"] == -0.8
    assert body["entry"]["analyzedAt"]
    assert body["risk"]["level"] == 5 and body["risk"]["assessed"] is True

    # editing the text drops the stale score
    r = client.patch(f"/journal/{entry['id']}", headers=auth, json={"entry": "A bit better today."})
    assert r.json()["sentimentScore"] is None

    sentiment.score = 0.5
    r = client.post(f"/journal/{entry['id']}/analyze", headers=auth)
    assert r.json()["risk"]["level"] == 1

def test_failed_analysis_leaves_risk_alone(client, auth, sentiment):
    client.post("/risk/questionnaire", headers=auth, json={"phq9Score": 16, "gad7Score": 0})
    entry = client.post("/journal", headers=auth, json={"entry": "ok"}).json()
    sentiment.fail = True
    assert client.post(f"/journal/{entry['id']}/analyze", headers=auth).status_code == 502
    assert client.get("/risk", headers=auth).json()["level"] == 3
    assert client.get("/journal", headers=auth).json()[0]["sentimentScore"] is None

def test_chat_reply_and_history(client, auth, llm):
    llm.texts.append("  That sounds tough. Want to talk about it?  ")
    r = client.post("/chat/message", headers=auth, json={"message": "I feel sad today"})
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["assistantMessage"]["text"] == "That sounds tough. Want to talk about it?"
    assert body["assistantMessage"]["mood"] == "concerned"
    assert body["meta"]["act"] == "LOW_MOOD" and body["meta"]["crisis"] is False

    llm.texts.append("Glad to hear it.")
    client.post("/chat/message", headers=auth, json={"message": "Actually a bit better now"})
    # the second call carries the first exchange as context
    contents = llm.calls[-1][1]
    assert [c["role"] for c in contents] == ["user", "model", "user"]

    history = client.get("/chat/messages", headers=auth).json()
    assert [m["role"] for m in history] == ["user", "assistant", "user", "assistant"]
    assert client.delete("/chat/messages", headers=auth).json() == {"ok": True}
    assert client.get("/chat/messages", headers=auth).json() == []

def test_chat_crisis_skips_model(client, auth, llm):
    r = client.post("/chat/message", headers=auth, json={"message": "I want to end my life"})
    assert r.status_code == 200
    body = r.json()
    assert body["meta"]["crisis"] is True
    assert "988" in body["assistantMessage"]["text"]
    assert llm.calls == []

def test_chat_upstream_failure_persists_nothing(client, auth, llm):
    llm.fail = True
    assert client.post("/chat/message", headers=auth, json={"message": "hello"}).status_code == 502
    assert client.get("/chat/messages", headers=auth).json() == []
    assert client.post("/chat/message", headers=auth, json={"message": " "}).status_code == 422

def test_today_tasks_follow_risk_tier(client, auth):
    client.post("/risk/questionnaire", headers=auth, json={"phq9Score": 16, "gad7Score": 0})
    r = client.get("/tasks/today", headers=auth)
    assert r.status_code == 200
    body = r.json()
    assert [t["title"] for t in body["tasks"][:2]] == tasks_for_risk(3)
    assert [t["id"] for t in body["tasks"][2:]] == ["mandatory_meditation", "mandatory_journal"]
    assert body["completionPercentage"] == 0

    r = client.post("/tasks/today/mandatory_journal/toggle", headers=auth)
    assert r.json()["completedCount"] == 1
    assert r.json()["completionPercentage"] == 25
    assert client.get("/tasks/today", headers=auth).json()["completedCount"] == 1

    r = client.post("/tasks/today/mandatory_journal/toggle", headers=auth)
    assert r.json()["completedCount"] == 0
    assert client.post("/tasks/today/nope/toggle", headers=auth).status_code == 404

def test_tier_change_replaces_generated_tasks(client, auth):
    client.post("/risk/questionnaire", headers=auth, json={"phq9Score": 0, "gad7Score": 0})
    client.post("/tasks/today/mandatory_meditation/toggle", headers=auth)
    client.post("/risk/questionnaire", headers=auth, json={"phq9Score": 21, "gad7Score": 0})
    body = client.get("/tasks/today", headers=auth).json()
    ids = [t["id"] for t in body["tasks"]]
    assert ids == ["risk_4_0", "risk_4_1", "mandatory_meditation", "mandatory_journal"]
    assert body["tasks"][2]["completed"] is True

def test_wellness_analyze_and_plan(client, auth, llm):
    assert client.get("/wellness/plan", headers=auth).status_code == 404
    client.post("/journal", headers=auth, json={"entry": "Worried about exams", "mood": "anxious"})
    llm.json_replies.append(dict(WELLNESS_REPLY))
    r = client.post("/wellness/analyze", headers=auth)
    assert r.status_code == 200, r.text
    plan = r.json()
    assert plan["scores"]["overallWellnessScore"] == 5.5
    assert plan["shouldReferral"] is True
    assert plan["riskLevel"] == 2
    assert plan["dailyActivities"] == ["Take a short walk", "Call a friend"]
    assert "Worried about exams" in llm.calls[-1][1][0]["parts"][0]["text"]
    assert client.get("/wellness/plan", headers=auth).json()["id"] == plan["id"]

    # unassessed users take their tasks from the plan
    ids = [t["id"] for t in client.get("/tasks/today", headers=auth).json()["tasks"]]
    assert ids == ["wellness_0", "wellness_1", "mandatory_meditation", "mandatory_journal"]

def test_wellness_falls_back_to_rule_activities(client, auth, llm):
    llm.json_replies.append({"moodScore": 8, "anxietyScore": 2, "stressScore": 2, "socialEngagementScore": 8})
    plan = client.post("/wellness/analyze", headers=auth).json()
    assert plan["dailyActivities"] == load_catalog()["activities"]["maintenance"]
    assert plan["shouldReferral"] is False

def test_wellness_incomplete_scores(client, auth, llm):
    llm.json_replies.append({"moodScore": 5, "anxietyScore": "high"})
    assert client.post("/wellness/analyze", headers=auth).status_code == 502
    assert client.get("/wellness/plan", headers=auth).status_code == 404

def test_dashboard(client, signup):
    data = signup(name="Sam")
    auth = {"Authorization": f"Bearer {data['token']['accessToken']}"}
    r = client.get("/dashboard", headers=auth)
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["name"] == "Sam"
    assert body["greeting"] in ("Good Morning", "Good Afternoon", "Good Evening")
    assert body["risk"]["level"] == 2
    assert body["wellness"] is None
    assert body["showReferral"] is False
    assert body["tasks"]["totalCount"] == 2

    client.post("/risk/questionnaire", headers=auth, json={"phq9Score": 0, "gad7Score": 16})
    body = client.get("/dashboard", headers=auth).json()
    assert body["showReferral"] is True
    assert body["tasks"]["totalCount"] == 4

def test_firebase_sign_in_issues_our_tokens(client, monkeypatch):
    from app.services.oauth import ExternalIdentity

    def fake_verify(token):
        if token != "good":
            raise ValueError("bad token")
        return ExternalIdentity(provider="firebase", subject="fb-123", email="fb.user@example.com", name="Robin")

    monkeypatch.setattr("app.api.routes.auth.verify_firebase_id_token", fake_verify)
    assert client.post("/auth/oauth/firebase", json={"idToken": "nope"}).status_code == 401
    r = client.post("/auth/oauth/firebase", json={"idToken": "good"})
    assert r.status_code == 200, r.text
    assert r.json()["user"]["name"] == "Robin"
    auth = {"Authorization": f"Bearer {r.json()['token']['accessToken']}"}
    assert client.get("/users/me", headers=auth).json()["email"] == "fb.user@example.com"
    # a second sign-in reuses the account
    again = client.post("/auth/oauth/firebase", json={"idToken": "good"}).json()
    assert again["user"]["id"] == r.json()["user"]["id"]
