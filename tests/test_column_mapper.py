from __future__ import annotations

import unittest

from remote_panel.mappers.column_mapper import ColumnMapper, ColumnRule, normalize_header


class TestColumnMapper(unittest.TestCase):
    def setUp(self) -> None:
        self.mapper = ColumnMapper()

    def test_maps_spanish_headers_with_irregular_casing_and_spacing(self) -> None:
        headers = ["  SPONSOR ", "Ejecutivo", "Fecha_Llamada", "Estado", "Notas"]

        column_map = self.mapper.map_columns(headers)

        self.assertEqual(
            column_map,
            {"sponsor": 0, "executive": 1, "call_date": 2, "status": 3, "notes": 4},
        )

    def test_maps_english_synonyms(self) -> None:
        headers = ["Call Date", "Executive Name", "Status", "Comments"]

        column_map = self.mapper.map_columns(headers)

        self.assertEqual(column_map["call_date"], 0)
        self.assertEqual(column_map["executive"], 1)
        self.assertEqual(column_map["status"], 2)
        self.assertEqual(column_map["notes"], 3)

    def test_status_ignores_sub_status_and_commitment_columns(self) -> None:
        headers = ["Sub Estado", "Estado Compromiso", "Estado"]

        column_map = self.mapper.map_columns(headers)

        self.assertEqual(column_map, {"status": 2})

    def test_plain_fecha_header_maps_to_call_date(self) -> None:
        column_map = self.mapper.map_columns(["Sponsor", "Ejecutivo", "Fecha", "Estado"])

        self.assertEqual(
            column_map,
            {"sponsor": 0, "executive": 1, "call_date": 2, "status": 3},
        )

    def test_plain_date_rule_skips_non_call_dates(self) -> None:
        headers = ["Fecha Compromiso", "Last Update", "Fecha Nacimiento", "Date"]

        column_map = self.mapper.map_columns(headers)

        self.assertEqual(column_map, {"call_date": 3})

    def test_estado_header_with_fecha_stays_status(self) -> None:
        self.assertEqual(self.mapper.match_header("Estado Fecha"), "status")

    def test_last_matching_header_wins(self) -> None:
        headers = ["Ejecutivo", "Estado", "Ejecutivo Backup"]

        column_map = self.mapper.map_columns(headers)

        self.assertEqual(column_map["executive"], 2)

    def test_first_matching_rule_wins_per_header(self) -> None:
        # "sponsor" is evaluated before "ejecutivo".
        column_map = self.mapper.map_columns(["Ejecutivo Sponsor"])

        self.assertEqual(column_map, {"sponsor": 0})

    def test_unmatched_and_blank_headers_are_ignored(self) -> None:
        column_map = self.mapper.map_columns(["RUT", "", None, "Teléfono"])

        self.assertEqual(column_map, {})

    def test_mapping_is_deterministic(self) -> None:
        headers = ["Sponsor", "Ejecutivo", "Fecha Llamada", "Estado", "Observaciones", "Estado"]

        self.assertEqual(self.mapper.map_columns(headers), self.mapper.map_columns(headers))

    def test_custom_rules_replace_defaults(self) -> None:
        mapper = ColumnMapper(rules=[ColumnRule("executive", ("agente",))])

        self.assertEqual(mapper.map_columns(["Agente", "Ejecutivo"]), {"executive": 0})

    def test_normalize_header(self) -> None:
        self.assertEqual(normalize_header("  Fecha LLAMADA "), "fecha llamada")
        self.assertEqual(normalize_header(None), "")


if __name__ == "__main__":
    unittest.main()
