from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from projecthub.auth.deps import get_db, get_principal
from projecthub.schemas.auth import RegisterIn, LoginIn, AuthOut, UserOut, VerifyOut, Principal
from projecthub.auth.service import register_user, login_user

router = APIRouter(prefix="/auth", tags=["auth"])

@router.post("/register", response_model=AuthOut, status_code=status.HTTP_201_CREATED)
def register(body: RegisterIn, db: Session = Depends(get_db)):
    user, token = register_user(db, body.name, body.email, body.password, body.role)
    return AuthOut(message="Account created successfully", token=token, user=UserOut.model_validate(user))

@router.post("/login", response_model=AuthOut)
def login(body: LoginIn, db: Session = Depends(get_db)):
    user, token = login_user(db, body.email, body.password)
    return AuthOut(message="Login successful", token=token, user=UserOut.model_validate(user))

@router.get("/verify", response_model=VerifyOut)
def verify(principal: Principal = Depends(get_principal)):
    return VerifyOut(user=UserOut(**principal.model_dump()))
