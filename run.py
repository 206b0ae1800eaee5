from playdeck import create_app
import os
import time
import webbrowser

# Entry point for running the auth listener without the desktop shell
app = create_app(os.getenv('PLAYDECK_ENV', 'development'))

if __name__ == '__main__':
    app.start()

    auth_url = app.auth_service.build_authorization_url()
    print(f"Log in to Spotify: {auth_url}")
    webbrowser.open(auth_url)

    while app.token_store.peek_pending_code() is None:
        time.sleep(0.5)

    outcome = app.dispatcher.invoke('exchange_code').result()
    if not outcome['success']:
        raise SystemExit(f"Login failed: {outcome['message']}")

    outcome = app.dispatcher.invoke('fetch_current_song').result()
    if outcome['success']:
        song = outcome['data']
        print(f"Now playing: {song['artist']} - {song['title']}")
    else:
        print(outcome['message'])

    app.shutdown()
