# splitledger/app.py
import logging

from flask import Flask, json, jsonify, request
from flask_cors import CORS
from pydantic import ValidationError
from werkzeug.exceptions import HTTPException

from splitledger.config import AppConfig
from splitledger.errors import LedgerError
from splitledger.logging_config import configure_logging
from splitledger.models import Expense, ExpenseSplit, Member
from splitledger.schemas import (
    AddEqualExpenseRequest,
    AddExpenseRequest,
    AddMemberRequest,
    CalculateRequest,
)
from splitledger.settlement import settle
from splitledger.store import LedgerStore, equal_shares

logger = logging.getLogger(__name__)


def create_app(config=None, store=None):
    config = config or AppConfig.from_env()
    store = store if store is not None else LedgerStore()

    app = Flask(__name__)
    CORS(app, resources={r"/api/*": {"origins": config.cors_origins}})  # lets the React frontend talk to this backend

    register_error_handlers(app)
    register_routes(app, store)
    return app


def register_error_handlers(app):
    @app.errorhandler(LedgerError)
    def handle_ledger_error(e):
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(ValidationError)
    def handle_validation_error(e):
        details = [
            {"loc": list(err["loc"]), "msg": err["msg"]}
            for err in e.errors(include_url=False)
        ]
        return jsonify({
            "error": "invalid request body",
            "code": "invalid_argument",
            "details": details,
        }), 400

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        # keep werkzeug's status and headers (Allow on 405), swap in a JSON body
        response = e.get_response()
        response.data = json.dumps({"error": e.description})
        response.content_type = "application/json"
        return response

    @app.errorhandler(Exception)
    def handle_unexpected(e):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        # Returns specific error message to the frontend if something crashes
        return jsonify({"error": str(e)}), 500


def _body():
    # silent so that a missing or broken body reaches pydantic as None
    return request.get_json(silent=True)


def register_routes(app, store):

    # --- health check ---
    @app.route('/api', methods=['GET'])
    def health_check():
        return jsonify({"status": "healthy", "message": "Backend is running!"})

    # --- members ---
    @app.route('/api/members', methods=['GET'])
    def list_members():
        return jsonify({"members": [m.to_dict() for m in store.list_members()]})

    @app.route('/api/members', methods=['POST'])
    def add_member():
        req = AddMemberRequest.model_validate(_body())
        return jsonify(store.add_member(req.name).to_dict()), 201

    @app.route('/api/members/<int:member_id>', methods=['DELETE'])
    def delete_member(member_id):
        store.delete_member(member_id)
        return '', 204

    # --- expenses ---
    @app.route('/api/expenses', methods=['GET'])
    def list_expenses():
        names = store.member_names()
        return jsonify({"expenses": [r.to_dict(names) for r in store.list_expenses()]})

    @app.route('/api/expenses', methods=['POST'])
    def add_expense():
        req = AddExpenseRequest.model_validate(_body())
        record = store.add_expense(
            req.description,
            req.amount,
            req.payer_id,
            [(split.member_id, split.amount) for split in req.splits],
        )
        return jsonify(record.to_dict(store.member_names())), 201

    @app.route('/api/expenses/equal', methods=['POST'])
    def add_equal_expense():
        req = AddEqualExpenseRequest.model_validate(_body())
        record = store.add_equal_expense(
            req.description, req.amount, req.payer_id, req.member_ids
        )
        return jsonify(record.to_dict(store.member_names())), 201

    @app.route('/api/expenses/<int:expense_id>', methods=['DELETE'])
    def delete_expense(expense_id):
        store.delete_expense(expense_id)
        return '', 204

    # --- read models ---
    @app.route('/api/balances', methods=['GET'])
    def balances():
        return jsonify({"balances": [b.to_dict() for b in store.balances()]})

    @app.route('/api/settlements', methods=['GET'])
    def settlements():
        return jsonify({"settlements": [s.to_dict() for s in store.settlements()]})

    # --- stateless calculation over a posted snapshot ---
    @app.route('/api/calculate', methods=['POST'])
    def calculate():
        req = CalculateRequest.model_validate(_body())

        # Convert JSON data into our ledger records
        members = [Member(id=m.id, name=m.name) for m in req.members]
        expenses = []
        splits = []
        for item in req.expenses:
            expenses.append(Expense(id=item.id, payer_id=item.payer_id, amount=item.amount))
            if item.involved is not None:
                shares = zip(item.involved, equal_shares(item.amount, len(item.involved)))
            else:
                shares = ((s.member_id, s.amount) for s in item.splits)
            for member_id, amount in shares:
                splits.append(ExpenseSplit(expense_id=item.id, member_id=member_id, amount=amount))

        balance_rows, settlement_rows = settle(members, expenses, splits)
        return jsonify({
            "balances": [b.to_dict() for b in balance_rows],
            "settlements": [s.to_dict() for s in settlement_rows],
        })


def main():
    configure_logging()
    config = AppConfig.from_env()
    app = create_app(config)
    logger.info("Starting splitledger on %s:%s", config.host, config.port)
    app.run(host=config.host, debug=config.debug, port=config.port)


if __name__ == '__main__':
    main()
