import httpx

BASE = "http://127.0.0.1:8000/api"

r = httpx.post(f"{BASE}/selection", json={"project_id": "mx-mangroves"}, timeout=10)
print(r.status_code)
sid = r.json()["session_id"]

r = httpx.put(f"{BASE}/selection/{sid}/area", json={"area_m2": 108}, timeout=10)
print(r.status_code)
print(r.text)

r = httpx.get(f"{BASE}/map/scale", params={"zoom": 13}, timeout=10)
print(r.text)
