"""
Command line smoke tests.
"""

import json

import main


class TestMain:

    def test_demo_add(self, capsys):
        assert main.main(['--demo', '1', '2', '3', '--capacity', '100', '--add', 'Crate', '90']) == 0
        assert "Placed Crate at 1-1-L1" in capsys.readouterr().out

    def test_listing_move(self, tmp_path, capsys):
        listing = tmp_path / "listing.json"
        listing.write_text(json.dumps([
            {"Location": "1-1-L1", "ProductId": 1, "ProductName": "Bolts", "Volume": 10},
            {"Location": "2-1-L1", "ProductId": 2, "ProductName": "Nuts", "Volume": 10},
            {"Location": "4-1-L1"}
        ]))
        code = main.main(['--listing', str(listing), '--move', '1-1-L1', '3-1-L1'])
        out = capsys.readouterr().out
        assert code == 0
        assert "Moved via chain shift: 1-1-L1 -> 2-1-L1 -> 3-1-L1" in out

    def test_validate_fails_on_oversized_product(self, tmp_path):
        listing = tmp_path / "listing.json"
        listing.write_text(json.dumps([
            {"Location": "1-1-L1", "ProductId": 1, "ProductName": "Boulder", "Volume": 5000}
        ]))
        assert main.main(['--listing', str(listing), '--validate']) == 1

    def test_bad_zones(self, capsys):
        assert main.main(['--demo', '1', '1', '2', '--zones', '5', '3', '1']) == 1
        assert "Error" in capsys.readouterr().out
