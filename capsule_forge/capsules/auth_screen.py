"""AuthScreen capsule: login, signup and password reset in one screen."""

from capsule_forge.schema import CapsuleDefinition

WEB = """import React, { useState } from 'react'

type Mode = 'login' | 'signup' | 'forgotPassword'

export interface {% component %}Props {
  mode?: Mode
  onLogin: () => void
  onSignup?: () => void
  onForgotPassword?: () => void
  logo?: string
  title?: string
  showSocialLogin?: boolean
  socialProviders?: string[]
}

export function {% component %}({
  mode = {% props.mode %},
  onLogin,
  onSignup,
  onForgotPassword,
  logo,
  title = {% props.title %},
  showSocialLogin = {% props.showSocialLogin %},
  socialProviders = {% props.socialProviders %},
}: {% component %}Props) {
  const [current, setCurrent] = useState<Mode>(mode)
  const [email, setEmail] = useState('')
  const [password, setPassword] = useState('')

  const submit = (event: React.FormEvent) => {
    event.preventDefault()
    if (current === 'login') onLogin()
    else if (current === 'signup') onSignup?.()
    else onForgotPassword?.()
  }

  const input: React.CSSProperties = {
    padding: {% theme.spacing %} / 2,
    borderRadius: {% theme.radius %},
    border: '1px solid #E5E7EB',
    fontFamily: {% theme.typography.fontFamily %},
  }

  return (
    <form
      onSubmit={submit}
      style={{
        display: 'flex',
        flexDirection: 'column',
        gap: {% theme.spacing %},
        maxWidth: 360,
        margin: '0 auto',
        padding: {% theme.spacing %} * 2,
        background: {% theme.colors.background %},
      }}
    >
      {logo ? <img src={logo} alt="" style={{ height: 48, alignSelf: 'center' }} /> : null}
      <h1 style={{ margin: 0, color: {% theme.colors.textPrimary %}, fontFamily: {% theme.typography.headingFont %} }}>
        {title}
      </h1>
      <input style={input} type="email" placeholder="Email" value={email} onChange={(e) => setEmail(e.target.value)} />
      {current !== 'forgotPassword' ? (
        <input
          style={input}
          type="password"
          placeholder="Password"
          value={password}
          onChange={(e) => setPassword(e.target.value)}
        />
      ) : null}
      <button
        type="submit"
        style={{ ...input, background: {% theme.colors.primary %}, color: '#FFFFFF', border: 'none', cursor: 'pointer' }}
      >
        {current === 'login' ? 'Sign in' : current === 'signup' ? 'Create account' : 'Send reset link'}
      </button>
      {showSocialLogin
        ? socialProviders.map((provider) => (
            <button key={provider} type="button" style={input}>
              Continue with {provider}
            </button>
          ))
        : null}
      <div style={{ display: 'flex', justifyContent: 'space-between', color: {% theme.colors.textSecondary %} }}>
        {current !== 'login' ? (
          <a onClick={() => setCurrent('login')}>Sign in</a>
        ) : (
          <a onClick={() => setCurrent('signup')}>Create account</a>
        )}
        {current === 'login' ? <a onClick={() => setCurrent('forgotPassword')}>Forgot password?</a> : null}
      </div>
    </form>
  )
}

export default {% component %}
"""

IOS = """import SwiftUI

struct {% component %}: View {
    enum Mode { case login, signup, forgotPassword }

    var mode: Mode = {% props.mode %}
    let onLogin: () -> Void
    var onSignup: (() -> Void)? = nil
    var onForgotPassword: (() -> Void)? = nil
    var logo: String? = nil
    var title: String = {% props.title %}
    var showSocialLogin: Bool = {% props.showSocialLogin %}
    var socialProviders: [String] = {% props.socialProviders %}

    @State private var current: Mode? = nil
    @State private var email = ""
    @State private var password = ""

    private var active: Mode { current ?? mode }

    var body: some View {
        VStack(spacing: {% theme.spacing %}) {
            if let logo {
                Image(logo).resizable().scaledToFit().frame(height: 48)
            }
            SwiftUI.Text(title)
                .font(.custom({% theme.typography.headingFont %}, size: 28))
                .foregroundColor({% theme.colors.textPrimary %})
            TextField("Email", text: $email)
                .textFieldStyle(.roundedBorder)
            if active != .forgotPassword {
                SecureField("Password", text: $password)
                    .textFieldStyle(.roundedBorder)
            }
            SwiftUI.Button(action: submit) {
                SwiftUI.Text(submitLabel)
                    .frame(maxWidth: .infinity)
                    .padding({% theme.spacing %} / 2)
                    .background({% theme.colors.primary %})
                    .foregroundColor(.white)
                    .cornerRadius({% theme.radius %})
            }
            if showSocialLogin {
                ForEach(socialProviders, id: \\.self) { provider in
                    SwiftUI.Button("Continue with \\(provider)") {}
                }
            }
            HStack {
                if active == .login {
                    SwiftUI.Button("Create account") { current = .signup }
                    Spacer()
                    SwiftUI.Button("Forgot password?") { current = .forgotPassword }
                } else {
                    SwiftUI.Button("Sign in") { current = .login }
                }
            }
            .foregroundColor({% theme.colors.textSecondary %})
        }
        .padding({% theme.spacing %} * 2)
    }

    private var submitLabel: String {
        switch active {
        case .login: return "Sign in"
        case .signup: return "Create account"
        case .forgotPassword: return "Send reset link"
        }
    }

    private func submit() {
        switch active {
        case .login: onLogin()
        case .signup: onSignup?()
        case .forgotPassword: onForgotPassword?()
        }
    }
}
"""

ANDROID = """import androidx.compose.foundation.layout.Arrangement
import androidx.compose.foundation.layout.Column
import androidx.compose.foundation.layout.Row
import androidx.compose.foundation.layout.fillMaxWidth
import androidx.compose.foundation.layout.padding
import androidx.compose.material3.ButtonDefaults
import androidx.compose.material3.OutlinedButton
import androidx.compose.material3.OutlinedTextField
import androidx.compose.material3.TextButton
import androidx.compose.runtime.Composable
import androidx.compose.runtime.getValue
import androidx.compose.runtime.mutableStateOf
import androidx.compose.runtime.remember
import androidx.compose.runtime.setValue
import androidx.compose.ui.Modifier
import androidx.compose.ui.text.input.PasswordVisualTransformation
import androidx.compose.ui.unit.dp
import coil.compose.AsyncImage

@Composable
fun {% component %}(
    mode: String = {% props.mode %},
    onLogin: () -> Unit,
    onSignup: (() -> Unit)? = null,
    onForgotPassword: (() -> Unit)? = null,
    logo: String? = null,
    title: String = {% props.title %},
    showSocialLogin: Boolean = {% props.showSocialLogin %},
    socialProviders: List<String> = {% props.socialProviders %},
    modifier: Modifier = Modifier,
) {
    var current by remember { mutableStateOf(mode) }
    var email by remember { mutableStateOf("") }
    var password by remember { mutableStateOf("") }

    Column(
        modifier = modifier.fillMaxWidth().padding(({% theme.spacing %} * 2).dp),
        verticalArrangement = Arrangement.spacedBy({% theme.spacing %}.dp),
    ) {
        if (logo != null) AsyncImage(model = logo, contentDescription = null)
        androidx.compose.material3.Text(text = title, color = {% theme.colors.textPrimary %})
        OutlinedTextField(value = email, onValueChange = { email = it }, label = { androidx.compose.material3.Text("Email") })
        if (current != "forgotPassword") {
            OutlinedTextField(
                value = password,
                onValueChange = { password = it },
                label = { androidx.compose.material3.Text("Password") },
                visualTransformation = PasswordVisualTransformation(),
            )
        }
        androidx.compose.material3.Button(
            onClick = {
                when (current) {
                    "signup" -> onSignup?.invoke()
                    "forgotPassword" -> onForgotPassword?.invoke()
                    else -> onLogin()
                }
            },
            modifier = Modifier.fillMaxWidth(),
            colors = ButtonDefaults.buttonColors(containerColor = {% theme.colors.primary %}),
        ) {
            androidx.compose.material3.Text(
                when (current) {
                    "signup" -> "Create account"
                    "forgotPassword" -> "Send reset link"
                    else -> "Sign in"
                }
            )
        }
        if (showSocialLogin) {
            socialProviders.forEach { provider ->
                OutlinedButton(onClick = {}, modifier = Modifier.fillMaxWidth()) {
                    androidx.compose.material3.Text("Continue with $provider")
                }
            }
        }
        Row {
            if (current == "login") {
                TextButton(onClick = { current = "signup" }) { androidx.compose.material3.Text("Create account") }
                TextButton(onClick = { current = "forgotPassword" }) { androidx.compose.material3.Text("Forgot password?") }
            } else {
                TextButton(onClick = { current = "login" }) { androidx.compose.material3.Text("Sign in") }
            }
        }
    }
}
"""

AUTH_SCREEN = CapsuleDefinition.model_validate(
    {
        "id": "auth-screen",
        "name": "AuthScreen",
        "description": "Sign-in, sign-up and password reset screen with social login",
        "category": "feature",
        "tags": ["auth", "login", "form", "screen"],
        "props": [
            {
                "name": "mode",
                "type": "select",
                "default": "login",
                "options": ["login", "signup", "forgotPassword"],
            },
            {"name": "onLogin", "type": "action", "required": True},
            {"name": "onSignup", "type": "action"},
            {"name": "onForgotPassword", "type": "action"},
            {"name": "logo", "type": "image"},
            {"name": "title", "type": "string", "default": "Welcome"},
            {"name": "showSocialLogin", "type": "boolean", "default": True},
            {
                "name": "socialProviders",
                "type": "array",
                "itemType": "string",
                "default": ["google", "apple"],
            },
        ],
        "platforms": {
            "web": {"code": WEB, "dependencies": ["react"]},
            "ios": {"code": IOS},
            "android": {"code": ANDROID, "dependencies": ["io.coil-kt:coil-compose"]},
        },
    }
)
