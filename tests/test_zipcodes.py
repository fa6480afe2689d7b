from volunteer_hub.models.zipcode import ZipcodeCoordinate
from volunteer_hub.services.zipcode_service import load_zipcodes_csv


class TestZipcodeLookup:
    def test_seeded_zip(self, client):
        r = client.get("/api/zipcodes/23510")
        assert r.status_code == 200
        assert r.json() == {
            "zipcode": "23510", "city": "Norfolk", "state": "VA", "latitude": 36.847, "longitude": -76.295,
        }

    def test_unknown_zip(self, client):
        assert client.get("/api/zipcodes/00000").status_code == 404

    def test_malformed_zip(self, client):
        r = client.get("/api/zipcodes/abcde")
        assert r.status_code == 400
        assert r.json()["error"] == "Zip code must be 5 digits"


class TestZipcodeLoader:
    def test_gazetteer_tsv(self, db, tmp_path):
        path = tmp_path / "gazetteer.txt"
        path.write_text(
            "GEOID\tALAND\tAWATER\tINTPTLAT\tINTPTLONG                 \n"
            "23451\t1\t1\t36.8529\t-75.9780\n"
            "bad\t1\t1\t1\t1\n"
        )
        assert load_zipcodes_csv(db, path) == 1
        row = db.query(ZipcodeCoordinate).filter_by(zipcode="23451").one()
        assert row.latitude == 36.8529
        assert row.longitude == -75.978

    def test_csv_upsert_with_state_filter(self, db, tmp_path):
        path = tmp_path / "zips.csv"
        path.write_text(
            "zipcode,city,state,latitude,longitude\n"
            "23510,Downtown Norfolk,VA,36.85,-76.29\n"
            "10001,New York,NY,40.75,-73.99\n"
        )
        assert load_zipcodes_csv(db, path, states={"VA"}) == 1
        db.expire_all()
        assert db.query(ZipcodeCoordinate).filter_by(zipcode="23510").one().city == "Downtown Norfolk"
        assert db.query(ZipcodeCoordinate).filter_by(zipcode="10001").count() == 0
