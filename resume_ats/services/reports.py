from typing import Any, Dict, List

import pandas as pd

from resume_ats.models.models import SECTION_ORDER

BASE_COLUMNS = ["analysis_id", "company_name", "company_id", "target_role", "ats_score"]


def _section_points(section_scores: Any) -> Dict[str, Any]:
    points = {name: None for name in SECTION_ORDER}
    for s in section_scores or []:
        if isinstance(s, dict) and s.get("name") in points:
            points[s["name"]] = s.get("score")
    return points


def comparison_frame(analyses: List[Dict[str, Any]]) -> pd.DataFrame:
    """One row per analysis, one column per section, best score first."""
    rows = []
    for a in analyses:
        row = {col: a.get(col) for col in BASE_COLUMNS}
        row.update(_section_points(a.get("section_scores")))
        row["created_at"] = a.get("created_at")
        rows.append(row)

    df = pd.DataFrame(rows, columns=BASE_COLUMNS + list(SECTION_ORDER) + ["created_at"])
    if len(df):
        df = df.sort_values("ats_score", ascending=False, kind="mergesort").reset_index(drop=True)
    return df


def comparison_csv(analyses: List[Dict[str, Any]]) -> str:
    return comparison_frame(analyses).to_csv(index=False)


def comparison_markdown(resume_id: str, analyses: List[Dict[str, Any]]) -> str:
    df = comparison_frame(analyses)
    md_lines = [f"# Resume {resume_id} - ATS Comparison"]

    if not len(df):
        md_lines.append("> No analyses recorded for this resume.\n")
        return "\n".join(md_lines)

    md_lines += [
        "| Rank | Company | Role | Score | " + " | ".join(SECTION_ORDER) + " |",
        "|---:|---|---|---:|" + "---:|" * len(SECTION_ORDER),
    ]
    for i, r in enumerate(df.to_dict("records"), start=1):
        sections = " | ".join(_fmt(r[name]) for name in SECTION_ORDER)
        md_lines.append(f"| {i} | {r['company_name']} | {r['target_role']} | {_fmt(r['ats_score'])} | {sections} |")
    return "\n".join(md_lines)


def _fmt(value) -> str:
    if value is None or pd.isna(value):
        return "-"
    return str(int(value))
