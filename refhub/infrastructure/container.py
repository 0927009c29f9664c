# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import timedelta
from functools import cached_property

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from refhub.application.services.password_hashing import WerkzeugPasswordHasher
from refhub.application.services.referral_codes import ReferralCodeManager
from refhub.application.services.session_tokens import JwtSessionTokenService
from refhub.application.use_cases.referrals.get_code import GetReferralCodeUseCase
from refhub.application.use_cases.referrals.issue_code import IssueReferralCodeUseCase
from refhub.application.use_cases.referrals.list_referees import ListRefereesUseCase
from refhub.application.use_cases.referrals.revoke_code import RevokeReferralCodeUseCase
from refhub.application.use_cases.users.login_user import LoginUserUseCase
from refhub.application.use_cases.users.register_user import RegisterUserUseCase
from refhub.infrastructure.db import build_engine, build_session_factory
from refhub.infrastructure.store.sqlalchemy_store import SqlAlchemyStore
from refhub.interfaces.http.controllers.auth_controller import AuthController
from refhub.interfaces.http.controllers.misc_controller import MiscController
from refhub.interfaces.http.controllers.referrals_controller import ReferralsController
from refhub.shared.clock import Clock, utcnow
from refhub.shared.config import AppConfig, load_config


class Container:
    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        engine: Engine | None = None,
        clock: Clock = utcnow,
    ) -> None:
        self.config = config or load_config()
        self.clock = clock
        self._engine = engine

    @cached_property
    def engine(self) -> Engine:
        return self._engine or build_engine(self.config.database)

    @cached_property
    def session_factory(self) -> sessionmaker[Session]:
        return build_session_factory(self.engine)

    @cached_property
    def store(self) -> SqlAlchemyStore:
        return SqlAlchemyStore(self.session_factory)

    @cached_property
    def password_hasher(self) -> WerkzeugPasswordHasher:
        return WerkzeugPasswordHasher(self.config.auth.password_hash_method)

    @cached_property
    def session_tokens(self) -> JwtSessionTokenService:
        return JwtSessionTokenService(
            self.config.auth.jwt_secret,
            ttl=timedelta(seconds=self.config.auth.token_ttl_seconds),
        )

    @cached_property
    def referral_code_manager(self) -> ReferralCodeManager:
        return ReferralCodeManager(self.store, code_length=self.config.referrals.code_length)

    # Use cases

    @cached_property
    def register_user_use_case(self) -> RegisterUserUseCase:
        return RegisterUserUseCase(
            store=self.store,
            referral_codes=self.referral_code_manager,
            password_hasher=self.password_hasher,
            clock=self.clock,
        )

    @cached_property
    def login_user_use_case(self) -> LoginUserUseCase:
        return LoginUserUseCase(
            store=self.store,
            tokens=self.session_tokens,
            password_hasher=self.password_hasher,
            clock=self.clock,
        )

    @cached_property
    def issue_referral_code_use_case(self) -> IssueReferralCodeUseCase:
        return IssueReferralCodeUseCase(
            referral_codes=self.referral_code_manager,
            default_ttl=timedelta(seconds=self.config.referrals.code_ttl_seconds),
            clock=self.clock,
        )

    @cached_property
    def revoke_referral_code_use_case(self) -> RevokeReferralCodeUseCase:
        return RevokeReferralCodeUseCase(referral_codes=self.referral_code_manager)

    @cached_property
    def get_referral_code_use_case(self) -> GetReferralCodeUseCase:
        return GetReferralCodeUseCase(
            store=self.store, referral_codes=self.referral_code_manager, clock=self.clock
        )

    @cached_property
    def list_referees_use_case(self) -> ListRefereesUseCase:
        return ListRefereesUseCase(store=self.store)

    # Controllers

    @cached_property
    def auth_controller(self) -> AuthController:
        return AuthController(
            register_use_case=self.register_user_use_case,
            login_use_case=self.login_user_use_case,
            request_timeout=self.config.request_timeout_seconds,
        )

    @cached_property
    def referrals_controller(self) -> ReferralsController:
        return ReferralsController(
            issue_code=self.issue_referral_code_use_case,
            revoke_code=self.revoke_referral_code_use_case,
            get_code=self.get_referral_code_use_case,
            list_referees=self.list_referees_use_case,
            tokens=self.session_tokens,
            clock=self.clock,
            request_timeout=self.config.request_timeout_seconds,
        )

    @cached_property
    def misc_controller(self) -> MiscController:
        return MiscController(engine=self.engine)


__all__ = ["Container"]
