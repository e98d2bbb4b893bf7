"""In-memory REST backend served through httpx.MockTransport."""

import json

import httpx


def _body(request: httpx.Request) -> dict:
    return json.loads(request.content or b"{}")


class InMemoryBackend:
    """Mimics the admin API: ``/api/<endpoint>`` and ``/api/<endpoint>/<id>``.

    With ``key_fields`` set, POST upserts on those fields like the
    mark-attendance route does. ``down`` makes every request fail with 503.
    """

    def __init__(
        self,
        endpoint: str,
        rows: list[dict] | None = None,
        key_fields: tuple[str, ...] = (),
    ):
        self.endpoint = endpoint
        self.rows: dict[str, dict] = {str(r["id"]): dict(r) for r in rows or []}
        self.key_fields = key_fields
        self.down = False
        self.requests: list[tuple[str, str]] = []
        self._next_id = 1000

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handle))

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append((request.method, request.url.path))
        if self.down:
            return httpx.Response(503, json={"error": "Service unavailable"})

        parts = request.url.path.strip("/").split("/")
        if parts[:2] != ["api", self.endpoint]:
            return httpx.Response(404, json={"error": "Unknown endpoint"})
        record_id = parts[2] if len(parts) > 2 else None

        if request.method == "GET" and record_id is None:
            return httpx.Response(200, json=list(self.rows.values()))
        if request.method == "POST" and record_id is None:
            return self._create(_body(request))
        if request.method == "PUT" and record_id in self.rows:
            self.rows[record_id].update(_body(request))
            return httpx.Response(200, json=self.rows[record_id])
        if request.method == "DELETE" and record_id in self.rows:
            del self.rows[record_id]
            return httpx.Response(204)
        return httpx.Response(404, json={"error": "Not found"})

    def _key(self, row: dict) -> tuple[str, ...]:
        return tuple(
            str(row.get(f, ""))[:10] if f == "date" else str(row.get(f, ""))
            for f in self.key_fields
        )

    def _create(self, body: dict) -> httpx.Response:
        if self.key_fields:
            for row in self.rows.values():
                if self._key(row) == self._key(body):
                    row.update(body)
                    return httpx.Response(200, json=row)
        row = {"id": self._next_id, "status": "active", "created_at": "2024-05-03T10:00:00Z", **body}
        self._next_id += 1
        self.rows[str(row["id"])] = row
        return httpx.Response(201, json=row)
