"""Sign-in, sign-up and sign-out routes."""

from fastapi import APIRouter, Response
from fastapi.responses import JSONResponse

from ainotes.dependencies import AuthProviderDep, SessionDep, SettingsDep
from ainotes.models import SignInCredentials, SignUpCredentials

router = APIRouter()


def _session_body(session) -> dict:
    return {
        "user_id": session.user_id,
        "email": session.email,
        "expires_at": session.expires_at.isoformat() if session.expires_at else None,
    }


@router.post("/signin")
async def sign_in(
    body: SignInCredentials,
    response: Response,
    provider: AuthProviderDep,
    settings: SettingsDep,
):
    result = await provider.sign_in(body.email, body.password)
    if not result.success:
        return JSONResponse({"error": result.error}, status_code=400)

    response.set_cookie(
        settings.AUTH_COOKIE_NAME,
        result.session.access_token,
        httponly=True,
        samesite="lax",
        secure=not settings.DEBUG,
    )
    return {**_session_body(result.session), "access_token": result.session.access_token}


@router.post("/signup", status_code=201)
async def sign_up(body: SignUpCredentials, provider: AuthProviderDep):
    result = await provider.sign_up(body.email, body.password, body.password_confirm)
    if not result.success:
        return JSONResponse({"error": result.error}, status_code=400)

    return {
        "user_id": result.user_id,
        "confirmation_required": result.session is None,
    }


@router.post("/signout")
async def sign_out(
    session: SessionDep,
    response: Response,
    provider: AuthProviderDep,
    settings: SettingsDep,
):
    result = await provider.sign_out(session)
    if not result.success:
        return JSONResponse({"error": result.error}, status_code=502)

    response.delete_cookie(settings.AUTH_COOKIE_NAME)
    return {"status": "signed_out"}


@router.get("/session")
async def get_session(session: SessionDep):
    return _session_body(session)
