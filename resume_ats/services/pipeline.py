from typing import Optional, TypedDict

from langgraph.graph import StateGraph, END

from resume_ats.models.models import (
    ATSScoreResult, CompanyRequirements, FeedbackResult, StudentContext,
)
from resume_ats.services.ats_scorer import calculate_ats_score
from resume_ats.services.feedback import generate_feedback


# LangGraph state and nodes
class AnalysisState(TypedDict, total=False):
    resume_text: str
    requirements: CompanyRequirements
    student: Optional[StudentContext]
    include_feedback: bool
    ats_result: ATSScoreResult
    feedback: Optional[FeedbackResult]


def node_score(state: AnalysisState):
    result = calculate_ats_score(state["resume_text"], state["requirements"])
    return {"ats_result": result}  # DELTA


def node_feedback(state: AnalysisState):
    feedback = generate_feedback(
        state["resume_text"],
        state["ats_result"],
        state["requirements"],
        state.get("student"),
    )
    return {"feedback": feedback}


def route_after_score(state: AnalysisState) -> str:
    return "generate_feedback" if state.get("include_feedback", True) else END


def build_graph():
    g = StateGraph(AnalysisState)
    g.add_node("score_resume", node_score)
    g.add_node("generate_feedback", node_feedback)
    g.set_entry_point("score_resume")
    g.add_conditional_edges("score_resume", route_after_score, {"generate_feedback": "generate_feedback", END: END})
    g.add_edge("generate_feedback", END)
    return g.compile()


_GRAPH = None


def get_graph():
    global _GRAPH
    if _GRAPH is None:
        _GRAPH = build_graph()
    return _GRAPH


def _initial_state(resume_text, requirements, student, include_feedback) -> AnalysisState:
    return {
        "resume_text": resume_text,
        "requirements": requirements,
        "student": student,
        "include_feedback": include_feedback,
        "feedback": None,
    }


def run_analysis(
    resume_text: str,
    requirements: CompanyRequirements,
    student: Optional[StudentContext] = None,
    include_feedback: bool = True,
) -> AnalysisState:
    """Score, then optionally attach feedback. Returns the final graph state."""
    return get_graph().invoke(_initial_state(resume_text, requirements, student, include_feedback))


def run_sequential(
    resume_text: str,
    requirements: CompanyRequirements,
    student: Optional[StudentContext] = None,
    include_feedback: bool = True,
) -> AnalysisState:
    state = _initial_state(resume_text, requirements, student, include_feedback)
    state.update(node_score(state))
    if route_after_score(state) != END:
        state.update(node_feedback(state))
    return state
