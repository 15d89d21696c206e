import requests
import json

BASE_URL = "http://127.0.0.1:8000"

login = {
    "name": "Aarav",
    "standard": "9th",
    "board": "CBSE"
}

try:
    response = requests.post(f"{BASE_URL}/auth/login", json=login)
    print(f"Login Status Code: {response.status_code}")
    session_id = response.json()["session_id"]
    headers = {
        "Content-Type": "application/json",
        "X-Session-Id": session_id
    }

    requests.post(f"{BASE_URL}/view", json={"view": "tutor"}, headers=headers)
    response = requests.post(f"{BASE_URL}/chat", json={"message": "Hello"}, headers=headers)
    print(f"Chat Status Code: {response.status_code}")
    print(f"Response: {json.dumps(response.json(), indent=2, ensure_ascii=False)}")
except Exception as e:
    print(f"Request failed: {e}")
