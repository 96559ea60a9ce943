from __future__ import annotations

import io
from typing import List, Tuple

import pandas as pd

from ..core.enums import ShiftCode
from .approval import ReportApproval
from .model import MonthlyReport

SHIFT_COLUMN_LABELS = {
    ShiftCode.SERVICE_DAY: "SD",
    ShiftCode.REST_DAY: "DR",
    ShiftCode.DUTY_12H: "12h",
    ShiftCode.DUTY_24H: "24h",
    ShiftCode.DUTY_6H: "6h",
}

REPORT_COLUMNS = [
    "Colaborador",
    "Cargo",
    "Registro",
    *SHIFT_COLUMN_LABELS.values(),
    "Total Plantões",
    "Substituições",
    "Dias Efetivos",
]

FLOATER_COLUMNS = ["Curinga", "Substituições", "Colaboradores substituídos", "Motivos", "Dias"]

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _br_datetime(value) -> str:
    return value.strftime("%d/%m/%Y às %H:%M:%S")


class ReportExporter:
    """Renders a MonthlyReport as a spreadsheet (pandas + openpyxl)."""

    report_sheet = "Relatório"
    floater_sheet = "Curingas"

    def to_frame(self, report: MonthlyReport) -> pd.DataFrame:
        rows = []
        for ln in report.lines:
            row = {"Colaborador": ln.name, "Cargo": ln.job_title, "Registro": ln.registry or "-"}
            for code, label in SHIFT_COLUMN_LABELS.items():
                row[label] = int(ln.shift_breakdown.get(code, 0))
            row["Total Plantões"] = ln.total_shifts
            row["Substituições"] = ln.substituted_days
            row["Dias Efetivos"] = ln.actual_days_worked
            rows.append(row)

        t = report.totals
        totals = {"Colaborador": "TOTAIS", "Cargo": "", "Registro": ""}
        for code, label in SHIFT_COLUMN_LABELS.items():
            totals[label] = int(t.shift_breakdown.get(code, 0))
        totals["Total Plantões"] = t.total_shifts
        totals["Substituições"] = t.substituted_days
        totals["Dias Efetivos"] = t.actual_days_worked
        rows.append(totals)

        return pd.DataFrame(rows, columns=REPORT_COLUMNS)

    def floaters_frame(self, report: MonthlyReport) -> pd.DataFrame:
        return pd.DataFrame(
            [
                {
                    "Curinga": f.substitute_name,
                    "Substituições": f.count,
                    "Colaboradores substituídos": ", ".join(f.subjects_covered),
                    "Motivos": ", ".join(f.reasons),
                    "Dias": ", ".join(str(d) for d in f.days),
                }
                for f in report.floaters
            ],
            columns=FLOATER_COLUMNS,
        )

    def header_rows(self, report: MonthlyReport) -> List[Tuple[str, object]]:
        scope = report.scope
        s = report.summary
        return [
            ("Instituição", report.institution),
            ("Relatório", f"Relatório Mensal de Escalas - {scope.category.value}"),
            ("Unidade", scope.unit),
            ("Mês/Ano", scope.label),
            ("Gerado em", _br_datetime(report.generated_at)),
            ("Colaboradores", s.roster_size),
            ("Total Dias Trabalhados", s.total_days_worked),
            ("Dias no Mês", s.days_in_month),
            ("Total Substituições", s.total_substitutions),
            ("Curingas Únicos", s.distinct_floaters),
        ]

    def to_xlsx(self, report: MonthlyReport, approval: ReportApproval) -> bytes:
        header = self.header_rows(report)
        table = self.to_frame(report)
        table_start = len(header) + 1

        out = io.BytesIO()
        with pd.ExcelWriter(out, engine="openpyxl") as writer:
            table.to_excel(writer, index=False, sheet_name=self.report_sheet, startrow=table_start)
            ws = writer.sheets[self.report_sheet]

            for row, (label, value) in enumerate(header, start=1):
                ws.cell(row=row, column=1, value=label)
                ws.cell(row=row, column=2, value=value)

            if approval.is_approved:
                ws.cell(row=1, column=len(REPORT_COLUMNS), value="APROVADO")

            # openpyxl rows are 1-based; +1 for the table's own header row.
            sig_row = table_start + 1 + len(table) + 3
            ws.cell(row=sig_row, column=1, value=approval.signer_name or "_" * 40)
            ws.cell(row=sig_row + 1, column=1, value="Enfermeira Responsável Técnico")
            ws.cell(row=sig_row + 2, column=1, value="COREN: _______________")
            ws.cell(row=sig_row, column=6, value=f"Data: {report.generated_at.strftime('%d/%m/%Y')}")
            ws.cell(row=sig_row + 1, column=6, value="Aprovação e Validação")
            ws.cell(row=sig_row + 2, column=6, value="Responsável pela Unidade")

            self.floaters_frame(report).to_excel(writer, index=False, sheet_name=self.floater_sheet)

        return out.getvalue()
