"""Button capsule."""

from capsule_forge.schema import CapsuleDefinition

WEB = """import React from 'react'

export interface {% component %}Props {
  text: string
  variant?: 'primary' | 'secondary' | 'outline' | 'ghost' | 'destructive'
  size?: 'sm' | 'md' | 'lg'
  disabled?: boolean
  loading?: boolean
  icon?: string
  fullWidth?: boolean
  onPress: () => void
}

const VARIANTS: Record<string, React.CSSProperties> = {
  primary: { background: {% theme.colors.primary %}, color: '#FFFFFF' },
  secondary: { background: {% theme.colors.secondary %}, color: '#FFFFFF' },
  outline: { background: 'transparent', color: {% theme.colors.primary %}, border: '2px solid currentColor' },
  ghost: { background: 'transparent', color: {% theme.colors.primary %} },
  destructive: { background: {% theme.colors.error %}, color: '#FFFFFF' },
}

const FONT_SIZES = { sm: 14, md: 16, lg: 20 }

export function {% component %}({
  text,
  variant = {% props.variant %},
  size = {% props.size %},
  disabled = {% props.disabled %},
  loading = {% props.loading %},
  icon,
  fullWidth = {% props.fullWidth %},
  onPress,
}: {% component %}Props) {
  return (
    <button
      type="button"
      onClick={onPress}
      disabled={disabled || loading}
      style={{
        ...VARIANTS[variant],
        fontFamily: {% theme.typography.fontFamily %},
        fontSize: FONT_SIZES[size],
        borderRadius: {% theme.radius %},
        padding: `8px ${ {% theme.spacing %} }px`,
        width: fullWidth ? '100%' : undefined,
        opacity: disabled ? 0.5 : 1,
      }}
    >
      {loading ? <span aria-busy="true">…</span> : null}
      {icon ? <span className="icon">{icon}</span> : null}
      <span>{text}</span>
    </button>
  )
}

export default {% component %}
"""

IOS = """import SwiftUI

struct {% component %}: View {
    enum Variant { case primary, secondary, outline, ghost, destructive }
    enum Size { case sm, md, lg }

    let text: String
    var variant: Variant = {% props.variant %}
    var size: Size = {% props.size %}
    var disabled: Bool = {% props.disabled %}
    var loading: Bool = {% props.loading %}
    var systemImage: String? = nil
    var fullWidth: Bool = {% props.fullWidth %}
    let onPress: () -> Void

    var body: some View {
        SwiftUI.Button(action: onPress) {
            HStack(spacing: 8) {
                if loading {
                    ProgressView()
                } else if let systemImage {
                    Image(systemName: systemImage)
                }
                SwiftUI.Text(text)
            }
            .font(.system(size: fontSize, weight: .semibold))
            .frame(maxWidth: fullWidth ? .infinity : nil)
            .padding(.horizontal, {% theme.spacing %})
            .padding(.vertical, 10)
            .foregroundColor(foreground)
            .background(background)
            .cornerRadius({% theme.radius %})
        }
        .disabled(disabled || loading)
    }

    private var fontSize: CGFloat {
        switch size {
        case .sm: return 14
        case .md: return 16
        case .lg: return 20
        }
    }

    private var background: Color {
        switch variant {
        case .primary: return {% theme.colors.primary %}
        case .secondary: return {% theme.colors.secondary %}
        case .destructive: return {% theme.colors.error %}
        case .outline, .ghost: return .clear
        }
    }

    private var foreground: Color {
        switch variant {
        case .outline, .ghost: return {% theme.colors.primary %}
        default: return .white
        }
    }
}
"""

ANDROID = """import androidx.compose.foundation.layout.Arrangement
import androidx.compose.foundation.layout.Row
import androidx.compose.foundation.layout.fillMaxWidth
import androidx.compose.foundation.shape.RoundedCornerShape
import androidx.compose.material3.ButtonDefaults
import androidx.compose.material3.CircularProgressIndicator
import androidx.compose.material3.OutlinedButton
import androidx.compose.material3.TextButton
import androidx.compose.runtime.Composable
import androidx.compose.ui.Modifier
import androidx.compose.ui.graphics.Color
import androidx.compose.ui.unit.dp
import androidx.compose.ui.unit.sp

@Composable
fun {% component %}(
    text: String,
    onPress: () -> Unit,
    variant: String = {% props.variant %},
    size: String = {% props.size %},
    disabled: Boolean = {% props.disabled %},
    loading: Boolean = {% props.loading %},
    icon: String? = null,
    fullWidth: Boolean = {% props.fullWidth %},
    modifier: Modifier = Modifier,
) {
    val shape = RoundedCornerShape({% theme.radius %}.dp)
    val sized = if (fullWidth) modifier.fillMaxWidth() else modifier
    val enabled = !disabled && !loading
    val fontSize = when (size) {
        "sm" -> 14.sp
        "lg" -> 20.sp
        else -> 16.sp
    }
    val label: @Composable () -> Unit = {
        Row(horizontalArrangement = Arrangement.spacedBy(8.dp)) {
            if (loading) CircularProgressIndicator(strokeWidth = 2.dp)
            androidx.compose.material3.Text(text = text, fontSize = fontSize)
        }
    }
    when (variant) {
        "outline" -> OutlinedButton(onClick = onPress, enabled = enabled, shape = shape, modifier = sized) { label() }
        "ghost" -> TextButton(onClick = onPress, enabled = enabled, shape = shape, modifier = sized) { label() }
        else -> androidx.compose.material3.Button(
            onClick = onPress,
            enabled = enabled,
            shape = shape,
            modifier = sized,
            colors = ButtonDefaults.buttonColors(
                containerColor = when (variant) {
                    "secondary" -> {% theme.colors.secondary %}
                    "destructive" -> {% theme.colors.error %}
                    else -> {% theme.colors.primary %}
                },
                contentColor = Color.White,
            ),
        ) { label() }
    }
}
"""

BUTTON = CapsuleDefinition.model_validate(
    {
        "id": "button",
        "name": "Button",
        "description": "Interactive button with variants, sizes and loading state",
        "category": "ui",
        "tags": ["interactive", "form", "action", "cta"],
        "props": [
            {"name": "text", "type": "string", "required": True, "description": "Button label"},
            {
                "name": "variant",
                "type": "select",
                "default": "primary",
                "options": ["primary", "secondary", "outline", "ghost", "destructive"],
            },
            {"name": "size", "type": "select", "default": "md", "options": ["sm", "md", "lg"]},
            {"name": "disabled", "type": "boolean", "default": False},
            {"name": "loading", "type": "boolean", "default": False},
            {
                "name": "icon",
                "type": "icon",
                "description": "SF Symbol / Material icon name",
                "platformMapping": {"ios": "systemImage"},
            },
            {"name": "fullWidth", "type": "boolean", "default": False},
            {"name": "onPress", "type": "action", "required": True},
        ],
        "platforms": {
            "web": {"code": WEB, "dependencies": ["react"]},
            "ios": {"code": IOS},
            "android": {"code": ANDROID, "dependencies": ["androidx.compose.material3:material3"]},
        },
    }
)
