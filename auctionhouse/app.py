"""The web application: routes, wiring and the command that serves it."""

from __future__ import annotations

import argparse
import json
import os
from typing import Any, Sequence

from dotenv import load_dotenv
from flask import Flask, Response, request
from pymongo.errors import PyMongoError

from auctionhouse.auction_repository import AuctionRepository
from auctionhouse.auction_usecase import AuctionUseCase
from auctionhouse.bid_repository import BidRepository
from auctionhouse.bid_usecase import BidUseCase
from auctionhouse.config import connect_database
from auctionhouse.controllers import (
    AuctionController,
    BidController,
    Reply,
    UserController,
)
from auctionhouse.user_repository import UserRepository
from auctionhouse.user_usecase import UserUseCase

ENVIRONMENT_VARIABLE = "AMBIENTE_PUBLICACAO"
ENV_DIRECTORY = "cmd/auction"
PORT = 8080


def env_file_path() -> str:
    """The dotenv file to load, chosen by the publishing environment variable."""
    environment = os.environ.get(ENVIRONMENT_VARIABLE)
    if environment is None:
        return f"{ENV_DIRECTORY}/.env"
    return f"{ENV_DIRECTORY}/.{environment.lower()}.env"


def _response(app: Flask, reply: Reply) -> Response:
    status, body = reply
    if body is None:
        return app.response_class(status=status)
    return app.response_class(
        json.dumps(body), status=status, mimetype="application/json"
    )


def create_app(
    user_controller: UserController,
    bid_controller: BidController,
    auction_controller: AuctionController,
) -> Flask:
    """A Flask application routing requests to the given controllers."""
    app = Flask(__name__)

    def find_auctions() -> Response:
        return _response(
            app,
            auction_controller.find_auctions(
                request.args.get("status", ""),
                request.args.get("category", ""),
                request.args.get("productName", ""),
            ),
        )

    def find_auction_by_id(auction_id: str) -> Response:
        return _response(app, auction_controller.find_auction_by_id(auction_id))

    def create_auction() -> Response:
        return _response(app, auction_controller.create_auction(request.get_data()))

    def find_winner(auction_id: str) -> Response:
        return _response(
            app, auction_controller.find_winning_bid_by_auction_id(auction_id)
        )

    def create_bid() -> Response:
        return _response(app, bid_controller.create_bid(request.get_data()))

    def find_bids(auction_id: str) -> Response:
        return _response(app, bid_controller.find_bid_by_auction_id(auction_id))

    def find_users() -> Response:
        return _response(app, user_controller.find_users())

    def find_user_by_id(user_id: str) -> Response:
        return _response(app, user_controller.find_user_by_id(user_id))

    def create_user() -> Response:
        return _response(app, user_controller.create_user(request.get_data()))

    routes: list[tuple[str, Any, str]] = [
        ("/auction", find_auctions, "GET"),
        ("/auction/<auction_id>", find_auction_by_id, "GET"),
        ("/auction", create_auction, "POST"),
        ("/auction/winner/<auction_id>", find_winner, "GET"),
        ("/bid", create_bid, "POST"),
        ("/bid/<auction_id>", find_bids, "GET"),
        ("/user", find_users, "GET"),
        ("/user/<user_id>", find_user_by_id, "GET"),
        ("/user", create_user, "POST"),
    ]
    for rule, view, method in routes:
        app.add_url_rule(rule, view.__name__, view, methods=[method])
    return app


def build_dependencies(
    database: Any,
) -> tuple[UserController, BidController, AuctionController]:
    """Wire repositories, use cases and controllers over one database."""
    auction_repository = AuctionRepository(database)
    bid_repository = BidRepository(database, auction_repository)
    user_repository = UserRepository(database)

    user_controller = UserController(UserUseCase(user_repository))
    auction_controller = AuctionController(
        AuctionUseCase(auction_repository, bid_repository)
    )
    bid_controller = BidController(BidUseCase(bid_repository))
    return user_controller, bid_controller, auction_controller


def main(argv: Sequence[str] | None = None) -> None:
    """Load settings, connect to MongoDB and serve the API on port 8080."""
    parser = argparse.ArgumentParser(
        prog="auctionhouse", description="Serve the auction HTTP API."
    )
    parser.parse_args(argv)

    path = env_file_path()
    if not os.path.isfile(path):
        raise SystemExit("Error trying to load env variables")
    load_dotenv(path)

    try:
        database = connect_database()
    except (PyMongoError, ValueError) as exc:
        raise SystemExit(str(exc)) from exc

    app = create_app(*build_dependencies(database))
    app.run(host="0.0.0.0", port=PORT)