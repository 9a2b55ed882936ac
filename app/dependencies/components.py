from app.bootstrap.components import Components


def get_components(
        env: str = 'development',
        env_file: str | None = '.env'
) -> Components:
    return Components(env, env_file)
