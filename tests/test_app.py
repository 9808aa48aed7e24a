import json
from collections import defaultdict

import pytest

from auctionhouse.app import build_dependencies, create_app, env_file_path, main


class FakeCollection:
    def __init__(self):
        self.documents = {}

    def _matches(self, document, query):
        return all(document.get(key) == value for key, value in query.items())

    def insert_one(self, document):
        self.documents[document["_id"]] = dict(document)

    def find(self, query):
        return [dict(doc) for doc in self.documents.values() if self._matches(doc, query)]

    def find_one(self, query, sort=None):
        found = self.find(query)
        if sort:
            for key, direction in reversed(sort):
                found.sort(key=lambda doc: doc[key], reverse=direction < 0)
        return found[0] if found else None

    def update_one(self, query, update):
        for document in self.documents.values():
            if self._matches(document, query):
                document.update(update["$set"])
                return


class FakeDatabase:
    def __init__(self):
        self.collections = defaultdict(FakeCollection)

    def __getitem__(self, name):
        return self.collections[name]


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setenv("AUCTION_INTERVAL", "1h")
    monkeypatch.setenv("MAX_BATCH_SIZE", "1")
    monkeypatch.setenv("BATCH_INSERT_INTERVAL", "1h")
    database = FakeDatabase()
    user_controller, bid_controller, auction_controller = build_dependencies(database)
    app = create_app(user_controller, bid_controller, auction_controller)
    yield app.test_client(), database
    bid_controller.bid_usecase.close()
    auction_controller.auction_usecase.auction_repository.close()


def test_env_file_path_default(monkeypatch):
    monkeypatch.delenv("AMBIENTE_PUBLICACAO", raising=False)
    assert env_file_path() == "cmd/auction/.env"


def test_env_file_path_lowercases_environment(monkeypatch):
    monkeypatch.setenv("AMBIENTE_PUBLICACAO", "PROD")
    assert env_file_path() == "cmd/auction/.prod.env"


def test_main_without_env_file(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("AMBIENTE_PUBLICACAO", raising=False)
    with pytest.raises(SystemExit) as excinfo:
        main([])
    assert excinfo.value.code == "Error trying to load env variables"


def test_user_round_trip(client):
    test_client, database = client
    created = test_client.post("/user", data=json.dumps({"name": "ann"}))
    assert created.status_code == 201
    user = created.get_json()
    assert user["name"] == "ann"
    assert user["id"] in database["users"].documents

    fetched = test_client.get(f"/user/{user['id']}")
    assert fetched.status_code == 200
    assert fetched.get_json() == user
    assert test_client.get("/user").get_json() == [user]


def test_bad_user_id_route(client):
    test_client, _ = client
    response = test_client.get("/user/not-a-uuid")
    assert response.status_code == 400
    assert response.get_json()["causes"][0]["field"] == "userId"


def test_auction_routes(client):
    test_client, database = client
    created = test_client.post(
        "/auction",
        data=json.dumps(
            {
                "product_name": "Guitar",
                "category": "music",
                "description": "An old acoustic guitar",
                "condition": 1,
            }
        ),
    )
    assert created.status_code == 201
    assert created.data == b""

    listed = test_client.get("/auction?status=0")
    assert listed.status_code == 200
    [auction] = listed.get_json()
    assert auction["product_name"] == "Guitar"
    assert auction["id"] in database["auctions"].documents

    winner = test_client.get(f"/auction/winner/{auction['id']}")
    assert winner.status_code == 200
    assert winner.get_json() == {"auction": auction}


def test_auction_list_requires_status(client):
    test_client, _ = client
    response = test_client.get("/auction")
    assert response.status_code == 400
    assert (
        response.get_json()["message"]
        == "Error trying to validate auction status param"
    )


def test_bid_route_rejects_invalid_bid(client):
    test_client, database = client
    response = test_client.post(
        "/bid", data=json.dumps({"user_id": "x", "auction_id": "y", "amount": 1})
    )
    assert response.status_code == 400
    assert response.get_json()["message"] == "UserId is not a valid id"
    assert database["bids"].documents == {}


def test_bid_list_route(client):
    test_client, _ = client
    assert test_client.get("/bid/bad").status_code == 400