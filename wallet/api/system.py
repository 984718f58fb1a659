# wallet/api/system.py
from wallet.api.base import Resource
from wallet.models import DbPing, Health, parse_record


class HealthApi(Resource):
    def check(self) -> Health:
        """GET /health - is the service alive?"""
        return parse_record(Health, self.client.get("/health"))

    def db_ping(self) -> DbPing:
        """GET /db-ping - can the service reach its database?"""
        return parse_record(DbPing, self.client.get("/db-ping"))
